# Infrastructure clients
from clients.memory_store import KeyValueStore, MemoryStore
from clients.valkey_client import ValkeyClient

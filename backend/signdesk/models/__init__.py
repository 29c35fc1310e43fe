from signdesk.models.kv import KeyValueEntry

__all__ = ["KeyValueEntry"]

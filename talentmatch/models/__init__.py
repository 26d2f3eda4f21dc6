from .application import ApplicationRecord

__all__ = ["ApplicationRecord"]

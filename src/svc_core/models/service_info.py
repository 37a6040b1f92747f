from dataclasses import dataclass

@dataclass
class ServiceInfo:
    name: str
    running: bool = False # snapshot taken at listing time, may be stale

from scm_blame.sinks.memory import InMemoryBlameSink

__all__ = ["InMemoryBlameSink"]

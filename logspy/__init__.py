"""In-memory log observation, write syncers, test doubles and logging adapters."""

__version__ = "0.1.0"

__all__ = ["grpc", "lineio", "observer", "testing_writers", "testlogger", "write_syncer"]
"""Application services layer (caches and session orchestration).

Services coordinate domain parsing with infrastructure IO. They hold state the
presentation layer reads but make no rendering or routing decisions.
"""

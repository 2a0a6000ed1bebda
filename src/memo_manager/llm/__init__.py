
"""OpenAI client construction and the Whisper/chat wrappers used by ingestion."""

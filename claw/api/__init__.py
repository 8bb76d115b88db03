"""HTTP surface for the assistant: chat turns, chat history, voice webhook."""

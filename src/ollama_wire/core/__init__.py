"""Configuration for ollama-wire transports."""

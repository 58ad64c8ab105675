"""Developer tools: the engine benchmark."""

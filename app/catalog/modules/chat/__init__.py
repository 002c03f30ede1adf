"""
Chat assistant: forwards a conversation to a hosted chat model with a fixed
system prompt describing the catalog.
"""

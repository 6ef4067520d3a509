"""Configuration module for Shard."""

"""Utilities for transport, logging and report storage."""

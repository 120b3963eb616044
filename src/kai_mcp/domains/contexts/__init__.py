"""Contexts domain - cluster context and namespace selection."""

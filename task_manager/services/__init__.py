"""Low-level services shared by the application layer."""

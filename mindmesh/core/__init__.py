"""Provider and storage adapters for MindMesh."""

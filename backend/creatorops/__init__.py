"""CreatorOps backend: campaigns, creators, tasks and CSV bulk import."""

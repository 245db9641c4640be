"""helloRun blog authoring and moderation service."""

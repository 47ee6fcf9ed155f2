"""Text command handling for the ``stronghold`` command."""

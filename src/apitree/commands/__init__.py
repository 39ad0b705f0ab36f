"""Built-in ``apitree`` sub-commands."""

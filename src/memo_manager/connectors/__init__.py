
"""Front-ends that feed lines into the command registry."""

"""HTTP surface for the Skill Kernel."""

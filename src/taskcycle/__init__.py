"""taskcycle - recurring task planner."""

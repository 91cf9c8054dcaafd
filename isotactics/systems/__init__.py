"""Per-tick systems: controller (selection/paths), motion, input and render."""

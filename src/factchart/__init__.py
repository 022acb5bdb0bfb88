"""FACT chart: kinematic joint archetypes rendered as freedom/constraint space pairs."""

"""Social pillar: relationships, interactions and their projections."""

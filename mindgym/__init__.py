"""MindGym — memory, Stroop and trail-making mini-games."""

"""Request gating for the tour planner web app."""

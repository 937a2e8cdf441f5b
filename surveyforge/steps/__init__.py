"""Wizard step modules: each exposes render_step(ctx) -> bool and (except the last) on_next(ctx) -> bool."""

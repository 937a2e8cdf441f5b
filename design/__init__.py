from design.theme.glass import apply_glassmorphism

__all__ = ["apply_glassmorphism"]

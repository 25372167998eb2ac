"""HTTP session layer for the quizwar engine."""

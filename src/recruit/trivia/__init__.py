"""Trivia rounds, questions and scoring."""

"""Studizen backend: student planner API with email OTP verification."""

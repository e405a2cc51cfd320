"""Mastermind codebreaker and codemaker over a line protocol."""

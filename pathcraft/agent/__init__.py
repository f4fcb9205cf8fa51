"""Roadmap generation: prompt, model client, response handling."""

"""Ambient infrastructure shared by planguard: settings and logging."""

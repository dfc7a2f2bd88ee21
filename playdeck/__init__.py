"""Playdeck: an in-memory music library, playlists and playback queue kept consistent."""

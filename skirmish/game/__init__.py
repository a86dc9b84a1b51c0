"""Server-side simulation: players, tweens, projectiles and the tick loop."""

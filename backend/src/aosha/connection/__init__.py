"""Real-time party channel over Socket.IO."""

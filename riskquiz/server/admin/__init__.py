"""
Admin module for the risk choice experiment console.

Provides:
- AdminNamespace for real-time SocketIO session control and updates
"""

"""Core building blocks shared by campus-authz features."""

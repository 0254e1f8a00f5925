"""Feature packages for workspace-authz."""

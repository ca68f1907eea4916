"""Protocol, transport and configuration for the mljboard client."""

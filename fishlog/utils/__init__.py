# Utility modules

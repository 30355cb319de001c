# Fishing Log API package

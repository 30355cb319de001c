# Domain services: flow data, moon phase, alerts, weather

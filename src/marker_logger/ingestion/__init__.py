"""Stream discovery, connections and sample polling."""

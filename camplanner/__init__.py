"""Camera layout planner: line-of-sight coverage for cameras on a floor plan."""

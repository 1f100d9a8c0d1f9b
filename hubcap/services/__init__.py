"""Domain services: link extraction, query building, ranking, thumbnails,
the feedback-driven "more links" flow and topic/subtopic suggestions."""

"""Persistence shared by the queue display services."""

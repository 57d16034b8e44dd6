"""MindCare microservices."""

"""MindCare: student wellness check-ins, risk scoring and urgent alerts."""

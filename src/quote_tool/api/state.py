"""Shared engine instance for the API process."""
from quote_tool.advisor.pitch import PitchAdvisor
from quote_tool.engine import PricingEngine

engine = PricingEngine()
advisor = PitchAdvisor()

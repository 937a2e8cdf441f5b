"""
SurveyForge Studio.

Streamlit front end for the SurveyForge survey-authoring backend.
"""

__version__ = "0.3.0"

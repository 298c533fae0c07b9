"""
Content Guardian - social media content moderation pipeline
"""

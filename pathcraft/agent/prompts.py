"""Prompt construction for roadmap generation."""

from pathcraft.schemas.roadmap import RoadmapFormInput

# Video resources carry this prefix plus a search query; resources.py
# turns it into a real search URL after parsing.
VIDEO_SEARCH_DIRECTIVE = "YOUTUBE_SEARCH:"

ROADMAP_PROMPT_TEMPLATE = """Create a detailed learning roadmap for the following requirements:

Topic: {topic}
Learning Goal: {goal}
Skill Level: {skill_level}
Time per Week: {time_per_week} hours
Duration: {duration} weeks
Learning Style: {learning_style}
Additional Details: {details}

Please create a structured learning roadmap with the following format:
1. Generate 4-10 learning phases, each with a clear title and description
2. For each phase, create 3-8 specific milestones
3. For each milestone, provide curated resources including:
   - YouTube videos with search-optimized titles
   - Articles and tutorials from real educational websites
   - Online courses from known platforms
   - Project ideas to apply the learning

Return the response as a JSON object with this structure:
{{
  "title": "Learning Path Title",
  "description": "Brief overview of the roadmap",
  "totalWeeks": {duration},
  "phases": [
    {{
      "id": "phase-1",
      "title": "Phase Title",
      "description": "Phase description",
      "weeks": 3,
      "milestones": [
        {{
          "title": "Milestone Title",
          "description": "What the student will learn",
          "resources": [
            {{
              "type": "video",
              "title": "Descriptive Video Title with Keywords",
              "url": "{directive}specific searchable video title and topic keywords for {skill_level} level",
              "source": "YouTube",
              "duration": "45 min",
              "level": "beginner"
            }},
            {{
              "type": "article",
              "title": "Article Title",
              "url": "https://developer.mozilla.org/example",
              "source": "Website Name",
              "readTime": "10 min",
              "level": "beginner"
            }},
            {{
              "type": "course",
              "title": "Course Title",
              "url": "https://www.coursera.org/learn/example",
              "source": "Platform Name",
              "duration": "4 weeks",
              "level": "beginner"
            }}
          ]
        }}
      ]
    }}
  ],
  "projects": [
    {{
      "title": "Project Title",
      "description": "Project description",
      "phase": "phase-1",
      "skills": ["skill1", "skill2"],
      "difficulty": "beginner"
    }}
  ]
}}

CRITICAL INSTRUCTIONS FOR VIDEO RESOURCES:
- For ALL video type resources, set the url field to: "{directive}detailed searchable query"
- The search query should include: topic name, specific concept, tutorial/guide keywords, and {skill_level} level
- Example: "{directive}React hooks tutorial complete guide beginner"
- Make search queries specific and likely to find high-quality educational content

FOR ARTICLES AND COURSES:
- Use real, well-known educational website domains (MDN, W3Schools, freeCodeCamp, official docs, etc.)
- For courses, use real platform URLs (Coursera, Udemy, edX, Pluralsight, etc.)

IMPORTANT:
- Every phase needs a unique "id"
- Resource "type" must be one of: video, article, course
- Resource "level" must be one of: beginner, intermediate, advanced
- Make sure all resources are relevant and high-quality for the {skill_level} level
- Return ONLY valid JSON, no markdown formatting, no code blocks
- DO NOT include trailing commas in arrays or objects
- Ensure all strings are properly quoted and escaped
- Make sure all brackets and braces are properly closed"""


def build_roadmap_prompt(form: RoadmapFormInput) -> str:
    """Render the generation prompt for a validated form.

    Pure and deterministic: the same form always yields the same prompt.
    """
    return ROADMAP_PROMPT_TEMPLATE.format(
        topic=form.topic,
        goal=form.goal.value,
        skill_level=form.skill_level.value,
        time_per_week=form.time_per_week,
        duration=form.duration,
        learning_style=", ".join(form.learning_style),
        details=form.details or "None",
        directive=VIDEO_SEARCH_DIRECTIVE,
    )

from __future__ import annotations

RESUME_ANALYSIS_SCHEMA = """{
  "overallScore": <number 0-100>,
  "categoryScores": {
    "format": <number 0-100>,
    "clarity": <number 0-100>,
    "achievements": <number 0-100>,
    "skills": <number 0-100>,
    "keywords": <number 0-100>
  },
  "keywordRecommendations": ["<keyword1>", "<keyword2>", ...],
  "sectionFeedback": {
    "summary": {"score": <number 0-100>, "feedback": "<detailed feedback>", "suggestions": ["<suggestion1>", "<suggestion2>"]},
    "experience": {"score": <number 0-100>, "feedback": "<detailed feedback>", "suggestions": ["<suggestion1>", "<suggestion2>"]},
    "education": {"score": <number 0-100>, "feedback": "<detailed feedback>", "suggestions": ["<suggestion1>", "<suggestion2>"]},
    "skills": {"score": <number 0-100>, "feedback": "<detailed feedback>", "suggestions": ["<suggestion1>", "<suggestion2>"]},
    "projects": {"score": <number 0-100>, "feedback": "<detailed feedback>", "suggestions": ["<suggestion1>", "<suggestion2>"]}
  },
  "strengths": ["<strength1>", "<strength2>"],
  "areasForImprovement": ["<area1>", "<area2>"],
  "overallFeedback": "<comprehensive summary of the resume>"
}"""

STUDY_NOTES_SCHEMA = """{
  "title": "<inferred title of the content>",
  "summary": "<comprehensive summary of the content in 2-3 paragraphs>",
  "keyPoints": [{"point": "<key point>", "explanation": "<brief explanation>"}],
  "definitions": [{"term": "<term>", "definition": "<definition>"}],
  "concepts": [{"concept": "<concept name>", "description": "<description>", "examples": ["<example1>", "<example2>"]}],
  "quizQuestions": [
    {
      "question": "<question>",
      "options": ["<option1>", "<option2>", "<option3>", "<option4>"],
      "correctAnswer": <index 0-3>,
      "explanation": "<why this is correct>"
    }
  ],
  "flashcards": [{"front": "<question or term>", "back": "<answer or definition>"}],
  "studyTips": ["<tip1>", "<tip2>"]
}"""

RESUME_ANALYSIS_TEMPLATE = (
    "You are an expert resume analyst. Analyze the following resume and provide detailed feedback in JSON format.\n"
    "\n"
    "Resume Text:\n"
    "{text}\n"
    "\n"
    "Provide your analysis in the following JSON structure (return ONLY valid JSON, no markdown):\n"
    "{schema}"
)

STUDY_NOTES_TEMPLATE = (
    "You are an expert study assistant. Analyze the following content and generate comprehensive "
    "study notes in JSON format.\n"
    "\n"
    "Content:\n"
    "{text}\n"
    "\n"
    "Provide your notes in the following JSON structure (return ONLY valid JSON, no markdown):\n"
    "{schema}"
)

TEMPLATES: dict[str, tuple[str, str]] = {
    "resume-analysis": (RESUME_ANALYSIS_TEMPLATE, RESUME_ANALYSIS_SCHEMA),
    "study-notes": (STUDY_NOTES_TEMPLATE, STUDY_NOTES_SCHEMA),
}

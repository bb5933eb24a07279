REQUIREMENT_PLACEHOLDER = "{requirement}"

DEFAULT_ANALYSIS_PROMPT = """You are an experienced presales technical consultant who is good at analysing customer requirements and extracting the key information.

Read the requirement document below carefully and extract the following:

1. **Project type**: what kind of project this is (e-commerce platform, enterprise management system, mobile app, ...)

2. **Business goals**: what the customer wants to achieve with the project

3. **Key features**: every functional requirement that is explicitly mentioned

4. **Tech stack**: a suitable technology stack for these requirements

5. **Non-functional requirements**:
   - performance (response time, concurrency, ...)
   - security (data protection, access control, ...)
   - scalability (future growth directions)

6. **Risks**: risks the project is likely to face

---

Requirement document:

{requirement}

---

Return the analysis as structured JSON."""

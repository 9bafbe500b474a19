"""Shared term tables for linter rules.

This module centralizes:
- CASING_TERMS: lowercase term -> correct casing (acronyms, brands, languages)
- AMBIGUOUS_TERMS: words that are both common English and proper nouns
- BACKTICK_IGNORED_TERMS: terms the backtick rule never wraps
- exemption tables used by the identifier and path classifiers

Used by the classifiers, the safety engine and the rule modules.
"""
import re


CASING_TERMS = {
    # Technical terms & acronyms
    'ai': 'AI',
    'api': 'API',
    'apis': 'APIs',
    'ar': 'AR',
    'aws': 'AWS',
    'cdc': 'CDC',
    'cdn': 'CDN',
    'cli': 'CLI',
    'cpo': 'CPO',
    'css': 'CSS',
    'dns': 'DNS',
    'es6': 'ES6',
    'fbi': 'FBI',
    'gcp': 'GCP',
    'graphql': 'GraphQL',
    'http': 'HTTP',
    'https': 'HTTPS',
    'ibm': 'IBM',
    'iot': 'IoT',
    'jwt': 'JWT',
    'json': 'JSON',
    'lcnc': 'LCNC',
    'llm': 'LLM',
    'mfa': 'MFA',
    'ml': 'ML',
    'mr': 'MR',
    'nasa': 'NASA',
    'nlp': 'NLP',
    'oauth2': 'OAuth2',
    'rest': 'REST',
    'rl': 'RL',
    'sdk': 'SDK',
    'spa': 'SPA',
    'sso': 'SSO',
    'sql': 'SQL',
    'ssl': 'SSL',
    'tco': 'TCO',
    'tls': 'TLS',
    'ui': 'UI',
    'unesco': 'UNESCO',
    'unicef': 'UNICEF',
    'url': 'URL',
    'urls': 'URLs',
    'ux': 'UX',
    'vpn': 'VPN',
    'vr': 'VR',
    'xml': 'XML',

    # Timezones
    'utc': 'UTC',
    'gmt': 'GMT',
    'est': 'EST',
    'edt': 'EDT',
    'cst': 'CST',
    'cdt': 'CDT',
    'mst': 'MST',
    'mdt': 'MDT',
    'pst': 'PST',
    'pdt': 'PDT',
    'aest': 'AEST',
    'aedt': 'AEDT',
    'cet': 'CET',
    'cest': 'CEST',
    'jst': 'JST',
    'ist': 'IST',

    # Languages & frameworks
    'angular': 'Angular',
    'astro': 'Astro',
    'c#': 'C#',
    'c++': 'C++',
    'deno': 'Deno',
    'eslint': 'ESLint',
    'fastapi': 'FastAPI',
    'javascript': 'JavaScript',
    'jest': 'Jest',
    'jsdoc': 'JSDoc',
    'kotlin': 'Kotlin',
    'nextjs': 'Next.js',
    'next.js': 'Next.js',
    'node.js': 'Node.js',
    'nuxt': 'Nuxt',
    'php': 'PHP',
    'pytest': 'pytest',
    'react.js': 'React.js',
    'react': 'React',
    'remix': 'Remix',
    'solidjs': 'SolidJS',
    'solid.js': 'SolidJS',
    'svelte': 'Svelte',
    'sveltekit': 'SvelteKit',
    'typescript': 'TypeScript',
    'vite': 'Vite',
    'vue': 'Vue',
    'vitest': 'Vitest',
    'webpack': 'Webpack',

    # Databases
    'cassandra': 'Cassandra',
    'clickhouse': 'ClickHouse',
    'couchdb': 'CouchDB',
    'dynamodb': 'DynamoDB',
    'elasticsearch': 'Elasticsearch',
    'firestore': 'Firestore',
    'mongodb': 'MongoDB',
    'mysql': 'MySQL',
    'neo4j': 'Neo4j',
    'postgresql': 'PostgreSQL',
    'redis': 'Redis',
    'sqlite': 'SQLite',
    'sql server': 'SQL Server',
    'supabase': 'Supabase',

    # Proper nouns & brands
    '2fa': '2FA',
    'adobe': 'Adobe',
    'agile': 'Agile',
    'amazon': 'Amazon',
    'android': 'Android',
    'anthropic': 'Anthropic',
    'apple': 'Apple',
    'azure': 'Azure',
    'bun': 'Bun',
    'chatgpt': 'ChatGPT',
    'claude': 'Claude',
    'codeberg': 'Codeberg',
    'confluence': 'Confluence',
    'copilot': 'Copilot',
    'covid': 'COVID',
    'dall-e': 'DALL-E',
    'debian': 'Debian',
    'devops': 'DevOps',
    'diátaxis': 'Diátaxis',
    'docker': 'Docker',
    'dr. patel': 'Dr. Patel',
    'facebook': 'Facebook',
    'figma': 'Figma',
    'gdpr': 'GDPR',
    'gemini': 'Gemini',
    'git': 'Git',
    'github': 'GitHub',
    'gitlab': 'GitLab',
    'glossary': 'Glossary',
    'google cloud': 'Google Cloud',
    'google': 'Google',
    'hipaa': 'HIPAA',
    'html': 'HTML',
    'huggingface': 'Hugging Face',
    'hugging face': 'Hugging Face',
    'iaas': 'IaaS',
    'ios': 'iOS',
    'japanese': 'Japanese',
    'jenkins': 'Jenkins',
    'jira': 'Jira',
    'kanban': 'Kanban',
    'kubernetes': 'Kubernetes',
    'langchain': 'LangChain',
    'linux': 'Linux',
    'llama': 'Llama',
    'macos': 'macOS',
    'markdown': 'Markdown',
    'markdownlint-cli2': 'markdownlint-cli2',
    'machine learning': 'Machine Learning',
    'meta': 'Meta',
    'michael': 'Michael',
    'microsoft': 'Microsoft',
    'midjourney': 'Midjourney',
    'netlify': 'Netlify',
    'notion': 'Notion',
    'npm': 'npm',
    'npm publishing': 'npm Publishing',
    'nvidia': 'NVIDIA',
    'openai': 'OpenAI',
    'paas': 'PaaS',
    'paris': 'Paris',
    'pci dss': 'PCI DSS',
    'planetscale': 'PlanetScale',
    'postman': 'Postman',
    'prettier': 'Prettier',
    'pytorch': 'PyTorch',
    'red hat': 'Red Hat',
    'rest api': 'REST API',
    'saas': 'SaaS',
    'salesforce': 'Salesforce',
    'scrum': 'Scrum',
    'slack': 'Slack',
    'socrates': 'Socrates',
    'single sign-on': 'Single Sign-On',
    'stripe': 'Stripe',
    'swagger': 'Swagger',
    'openapi': 'OpenAPI',
    'pandoc': 'Pandoc',
    'tensorflow': 'TensorFlow',
    'terraform': 'Terraform',
    'twilio': 'Twilio',
    'microsoft word': 'Microsoft Word',
    'ubuntu': 'Ubuntu',
    'user experience': 'User experience',
    'user interface': 'User Interface',
    'vercel': 'Vercel',
    'vs code': 'VS Code',
    'vscode': 'VS Code',
    'windows': 'Windows',
    'yarn': 'Yarn',
    'zoloft': 'Zoloft',

    # Multi-word service names
    'amazon web services': 'Amazon Web Services',
    'api gateway': 'API Gateway',
    'aws lambda': 'AWS Lambda',
    'azure functions': 'Azure Functions',
    'ci/cd': 'CI/CD',
    'google cloud platform': 'Google Cloud Platform',
    'github actions': 'GitHub Actions',
    'github projects': 'GitHub Projects',
    'gitlab ci': 'GitLab CI',
    'microsoft azure': 'Microsoft Azure',

    # Geographic names
    'andes': 'Andes',
    'mit': 'MIT',

    # GitHub alert labels are always upper case
    'note': 'NOTE',
    'tip': 'TIP',
    'important': 'IMPORTANT',
    'warning': 'WARNING',
    'caution': 'CAUTION',

    'semver': 'SemVer',
}


# Words that are common English and also proper nouns. Never autofixed.
AMBIGUOUS_TERMS = {
    'word': {
        'proper_form': 'Word',
        'type': 'product-name',
        'reason': 'Could be common noun "word" OR Microsoft Word (the software)',
    },
    'go': {
        'proper_form': 'Go',
        'type': 'programming-language',
        'reason': 'Could be verb "go" OR Go programming language',
    },
    'swift': {
        'proper_form': 'Swift',
        'type': 'programming-language',
        'reason': 'Could be adjective "swift" OR Swift programming language',
    },
    'rust': {
        'proper_form': 'Rust',
        'type': 'programming-language',
        'reason': 'Could be noun "rust" OR Rust programming language',
    },
    'ruby': {
        'proper_form': 'Ruby',
        'type': 'programming-language',
        'reason': 'Could be gemstone "ruby" OR Ruby programming language',
    },
    'python': {
        'proper_form': 'Python',
        'type': 'programming-language',
        'reason': 'Could be snake "python" OR Python programming language',
    },
    'java': {
        'proper_form': 'Java',
        'type': 'programming-language',
        'reason': 'Could be island/coffee "java" OR Java programming language',
    },
    'scala': {
        'proper_form': 'Scala',
        'type': 'programming-language',
        'reason': 'Could be Italian word "scala" OR Scala programming language',
    },
    'dart': {
        'proper_form': 'Dart',
        'type': 'programming-language',
        'reason': 'Could be noun "dart" OR Dart programming language',
    },
    'patch': {
        'proper_form': 'PATCH',
        'type': 'semver-term',
        'reason': 'Could be verb/noun "patch" OR SemVer PATCH version',
    },
    'minor': {
        'proper_form': 'MINOR',
        'type': 'semver-term',
        'reason': 'Could be adjective "minor" OR SemVer MINOR version',
    },
    'major': {
        'proper_form': 'MAJOR',
        'type': 'semver-term',
        'reason': 'Could be adjective "major" OR SemVer MAJOR version',
    },
}


# Slash pairs that read as prose options, not paths
OPTION_PAIRS = frozenset({
    'on/off', 'true/false', 'yes/no', 'read/write', 'input/output', 'pass/fail',
    'enable/disable', 'start/stop', 'open/close', 'get/set', 'push/pull',
    'left/right', 'up/down', 'in/out', 'and/or', 'either/or', 'http/https',
    'import/export', 'get/post', 'put/post', 'put/patch', 'create/update',
    'add/remove', 'insert/delete', 'show/hide', 'expand/collapse', 'min/max',
    'first/last', 'prev/next', 'before/after', 'old/new', 'src/dest',
    'source/target', 'from/to', 'client/server', 'local/remote', 'dev/prod',
    'integration/e2e', 'value/effort', 'feature/module', 'added/updated',
    'adapt/extend', 'start/complete', 'lowest/most',
    'npm/node.js', 'client/device/os',
})

_ADDITIONAL_BACKTICK_IGNORED = [
    'github.com',
    'ulca.edu',
    'e.g',
    'i.e',
    'CI/CD',
    'Describe/test',
    'CSV/JSON',
    'Swagger/OpenAPI',
    'Integration/E2E',
    'Value/Effort',
    # Abbreviations and common acronyms
    'e.g.', 'i.e.', 'etc.', 'vs.', 'et al.', 'aka', 'viz.', 'N/A',
    'AJAX', 'CI', 'CD', 'DOM', 'GUID', 'IDE', 'JS', 'OAuth', 'OS', 'TS', 'URI',
    'UUID', 'YAML',
    'db', 'os', 'pnpm', 'sdk', 'ui', 'ux', 'cli', 'api',
    # Bare extensions
    'css', 'go', 'html', 'java', 'js', 'jsx', 'json', 'kt', 'md', 'ps1', 'py',
    'rb', 'rs', 'scss', 'sh', 'swift', 'toml', 'ts', 'tsx', 'xml', 'yaml', 'yml',
    'localhost',
    'regex',
]

# Case-sensitive
BACKTICK_IGNORED_TERMS = frozenset(
    list(CASING_TERMS.values()) + _ADDITIONAL_BACKTICK_IGNORED + sorted(OPTION_PAIRS)
)


# Two-segment slash pairs made of these words are treated as prose
COMMON_CONCEPTUAL_WORDS = frozenset({
    'true', 'false', 'yes', 'no', 'on', 'off', 'read', 'write', 'input', 'output',
    'pass', 'fail', 'enable', 'disable', 'start', 'stop', 'open', 'close',
    'get', 'set', 'push', 'pull', 'left', 'right', 'up', 'down', 'in', 'out',
    'and', 'or', 'either', 'http', 'https', 'import', 'export', 'add', 'remove',
    'insert', 'delete', 'show', 'hide', 'expand', 'collapse', 'min', 'max',
    'first', 'last', 'prev', 'next', 'before', 'after', 'old', 'new',
    'client', 'server', 'local', 'remote', 'dev', 'prod', 'source', 'target',
    'from', 'to', 'create', 'update', 'post', 'put', 'patch',
    'integration', 'e2e', 'value', 'effort', 'feature', 'module', 'added', 'updated',
    'adapt', 'extend', 'complete', 'lowest', 'most',
})

KNOWN_DIRECTORY_PREFIXES = frozenset({
    'src', 'lib', 'dist', 'build', 'out', 'bin', 'test', 'tests', 'spec', 'specs',
    'doc', 'docs', 'examples', 'demo', 'config', 'configs', 'scripts', 'tools',
    'assets', 'static', 'public', 'private', 'node_modules', 'vendor', 'packages',
    'app', 'apps', 'components', 'pages', 'views', 'models', 'controllers',
    'services', 'utils', 'helpers', 'middleware', 'routes', 'api', 'styles',
    'css', 'js', 'ts', 'img', 'images', 'fonts', 'data', 'fixtures',
})

# Slash lists of these words describe prose ("tests/lints/quality")
PROSE_LIST_WORDS = frozenset({
    'letters', 'numbers', 'hyphens', 'symbols', 'characters', 'words', 'spaces',
    'tests', 'lints', 'checks', 'builds', 'runs', 'tasks', 'jobs', 'steps',
    'files', 'folders', 'items', 'entries', 'records', 'rows', 'columns',
    'inputs', 'outputs', 'results', 'errors', 'warnings', 'issues', 'bugs',
    'features', 'options', 'settings', 'configs', 'values', 'keys', 'names',
    'build', 'test', 'lint', 'check', 'run', 'start', 'stop', 'deploy',
    'quality', 'performance', 'security', 'safety', 'stability',
})

# Locale codes look like snake_case but are not identifiers
SNAKE_CASE_EXEMPTIONS = frozenset({
    'en_US', 'en_GB', 'en_AU', 'en_CA', 'en_IN', 'en_NZ', 'en_IE', 'en_ZA',
    'es_ES', 'es_MX', 'es_AR', 'fr_FR', 'fr_CA', 'fr_BE', 'fr_CH', 'de_DE',
    'de_AT', 'de_CH', 'it_IT', 'pt_BR', 'pt_PT', 'nl_NL', 'nl_BE', 'sv_SE',
    'da_DK', 'nb_NO', 'fi_FI', 'pl_PL', 'cs_CZ', 'ru_RU', 'uk_UA', 'tr_TR',
    'el_GR', 'he_IL', 'ar_SA', 'hi_IN', 'th_TH', 'vi_VN', 'id_ID', 'ms_MY',
    'ja_JP', 'ko_KR', 'zh_CN', 'zh_TW', 'zh_HK',
})

# Brand names with internal capitals
CAMEL_CASE_EXEMPTIONS = frozenset({
    'iPhone', 'iPad', 'iPod', 'iMac', 'iOS', 'iPadOS', 'iCloud', 'iTunes',
    'iMessage', 'iWork', 'eBay', 'eBook', 'eBooks', 'eCommerce', 'eLearning',
    'macOS', 'tvOS', 'watchOS', 'visionOS', 'LinkedIn', 'YouTube', 'PlayStation',
    'WordPress', 'OpenAI', 'DeepMind', 'AlphaGo', 'MacBook', 'WiFi', 'PowerPoint',
    'JavaScript', 'TypeScript', 'GitHub', 'GitLab', 'BitBucket', 'Bitbucket',
    'DevOps', 'FedEx', 'PayPal', 'DoorDash', 'SoundCloud', 'WhatsApp', 'TikTok',
    'HubSpot', 'DocuSign', 'DreamWorks', 'McKinsey', 'SharePoint', 'OneDrive',
    'OneNote', 'QuickTime', 'FaceTime', 'AirDrop', 'AirPods', 'AirPlay',
    'CrowdStrike', 'SalesForce', 'NetSuite', 'ServiceNow', 'DigitalOcean',
    'CloudFlare', 'Cloudflare', 'DynamoDB', 'MongoDB', 'PostgreSQL', 'MySQL',
    'GraphQL', 'ClickHouse', 'CouchDB', 'PlanetScale', 'LangChain', 'PyTorch',
    'TensorFlow', 'SvelteKit', 'SolidJS', 'FastAPI', 'ChatGPT', 'ESLint', 'JSDoc',
    'IoT', 'SaaS', 'PaaS', 'IaaS', 'OAuth', 'SemVer', 'npmJS',
})

MC_MAC_NAME_PATTERN = re.compile(r'^(?:Mc|Mac)[A-Z][a-z]+$')


# Brand and idiom phrases that legitimately contain a literal ampersand
AMPERSAND_BRAND_PHRASES = (
    'Barnes & Noble', 'AT&T', 'Procter & Gamble', 'P&G', 'Johnson & Johnson',
    'J&J', 'Dolce & Gabbana', 'D&G', 'H&M', 'M&M', 'Ben & Jerry',
    'Bed Bath & Beyond', 'Arm & Hammer', 'Ernst & Young', 'Fresh & Save',
    'Simon & Schuster', 'Marks & Spencer', 'M&S', 'Standard & Poor', 'S&P',
    'Tiffany & Co', 'Lord & Taylor', 'Smith & Wesson', 'Black & Decker',
    'Fruit & Fibre', 'Fish & Chips', 'R&D', 'R & D', 'Q&A', 'Q & A',
)

AMPERSAND_DEFAULT_EXCEPTIONS = ('R&D', 'Q&A', 'M&A', 'S&P', 'AT&T')

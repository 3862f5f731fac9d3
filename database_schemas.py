# Database schema definitions

USERS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        display_name TEXT NOT NULL,
        photo_url TEXT,
        is_owner BOOLEAN NOT NULL DEFAULT 0,
        has_admin_access BOOLEAN NOT NULL DEFAULT 0,
        role TEXT, -- 'Supreme Leader', 'The Council of Snow', 'The Great Hall of the North', 'admin'
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
'''

POSTS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS posts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT,
        content TEXT NOT NULL,
        author_id TEXT NOT NULL,
        is_admin_post BOOLEAN NOT NULL DEFAULT 0,
        file_attachment_ids TEXT, -- comma-joined uploaded_files ids
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (author_id) REFERENCES users (id)
    )
'''

COMMENTS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS comments (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        content TEXT NOT NULL,
        post_id INTEGER NOT NULL,
        author_id TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
        FOREIGN KEY (author_id) REFERENCES users (id)
    )
'''

LIKES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS likes (
        post_id INTEGER NOT NULL,
        user_id TEXT NOT NULL,
        PRIMARY KEY (post_id, user_id),
        FOREIGN KEY (post_id) REFERENCES posts (id) ON DELETE CASCADE,
        FOREIGN KEY (user_id) REFERENCES users (id)
    )
'''

CHAT_MESSAGES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS chat_messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        content TEXT NOT NULL,
        author_id TEXT NOT NULL,
        file_attachment_ids TEXT,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (author_id) REFERENCES users (id)
    )
'''

DIRECT_MESSAGES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS direct_messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        content TEXT NOT NULL,
        sender_id TEXT NOT NULL,
        recipient_id TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (sender_id) REFERENCES users (id),
        FOREIGN KEY (recipient_id) REFERENCES users (id)
    )
'''

APP_SETTINGS_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS app_settings (
        key TEXT PRIMARY KEY CHECK (LENGTH(key) <= 100),
        value TEXT NOT NULL
    )
'''

UPLOADED_FILES_TABLE_SCHEMA = '''
    CREATE TABLE IF NOT EXISTS uploaded_files (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        filename TEXT NOT NULL,
        mime_type TEXT NOT NULL,
        size INTEGER NOT NULL,
        data BLOB NOT NULL,
        uploaded_by TEXT NOT NULL,
        expires_at TIMESTAMP NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (uploaded_by) REFERENCES users (id)
    )
'''

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_posts_admin_created ON posts (is_admin_post, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_comments_post ON comments (post_id)",
    "CREATE INDEX IF NOT EXISTS idx_chat_created ON chat_messages (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_dm_pair ON direct_messages (sender_id, recipient_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_files_expires ON uploaded_files (expires_at)",
]

# Domain services: classification, filtering, repositories and dashboard assembly

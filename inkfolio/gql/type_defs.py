"""GraphQL SDL for the content API, bound to resolvers in the sibling modules."""

type_defs = """
scalar DateTime
scalar FileUpload

schema {
  query: Query
  mutation: Mutation
}

enum Role {
  USER
  ADMIN
}

enum OrderDirection {
  asc
  desc
}

type User {
  id: ID!
  email: String!
  name: String
  role: Role!
  createdAt: DateTime!
  updatedAt: DateTime!
  posts: [Post!]!
}

type Post {
  id: ID!
  title: String!
  slug: String!
  excerpt: String
  content: String!
  published: Boolean!
  publishedAt: DateTime
  createdAt: DateTime!
  updatedAt: DateTime!
  author: User!
  category: Category
  tags: [Tag!]!
}

type Category {
  id: ID!
  name: String!
  slug: String!
  description: String
  createdAt: DateTime!
  updatedAt: DateTime!
  posts: [Post!]!
  _count: PostCount!
}

type Tag {
  id: ID!
  name: String!
  slug: String!
  createdAt: DateTime!
  updatedAt: DateTime!
  posts: [Post!]!
  _count: PostCount!
}

type PostCount {
  posts: Int!
}

type Project {
  id: ID!
  title: String!
  slug: String!
  description: String!
  content: String
  technologies: [String!]!
  githubUrl: String
  liveUrl: String
  imageUrl: String
  featured: Boolean!
  published: Boolean!
  createdAt: DateTime!
  updatedAt: DateTime!
}

type Resume {
  id: ID!
  data: String!
  createdAt: DateTime!
  updatedAt: DateTime!
}

type Upload {
  id: ID!
  filename: String!
  originalName: String!
  mimetype: String!
  encoding: String!
  url: String!
  size: Int!
  folder: String!
  uploadedBy: User!
  createdAt: DateTime!
}

type AuthPayload {
  token: String!
  refreshToken: String!
  user: User!
}

input PostInput {
  title: String!
  slug: String!
  excerpt: String
  content: String!
  published: Boolean
  categoryId: String
  tagIds: [String!]
}

input PostUpdateInput {
  title: String
  slug: String
  excerpt: String
  content: String
  published: Boolean
  categoryId: String
  tagIds: [String!]
}

input CategoryInput {
  name: String!
  slug: String!
  description: String
}

input CategoryUpdateInput {
  name: String
  slug: String
  description: String
}

input TagInput {
  name: String!
  slug: String!
}

input TagUpdateInput {
  name: String
  slug: String
}

input ProjectInput {
  title: String!
  slug: String!
  description: String!
  content: String
  technologies: [String!]!
  githubUrl: String
  liveUrl: String
  imageUrl: String
  featured: Boolean
  published: Boolean
}

input ProjectUpdateInput {
  title: String
  slug: String
  description: String
  content: String
  technologies: [String!]
  githubUrl: String
  liveUrl: String
  imageUrl: String
  featured: Boolean
  published: Boolean
}

input ResumeInput {
  personalInfo: String!
  summary: String!
  experience: String!
  education: String!
  skills: String!
  projects: String!
  certifications: String
  languages: String
}

input PostsFilter {
  published: Boolean
  categoryId: String
  tagIds: [String!]
  search: String
}

input ProjectsFilter {
  published: Boolean
  featured: Boolean
  search: String
  technologies: [String!]
}

input PostOrderBy {
  createdAt: OrderDirection
  publishedAt: OrderDirection
  title: OrderDirection
}

input ProjectOrderBy {
  createdAt: OrderDirection
  title: OrderDirection
  featured: OrderDirection
}

input UploadOrderBy {
  createdAt: OrderDirection
  filename: OrderDirection
  size: OrderDirection
}

type Query {
  me: User

  posts(filter: PostsFilter, skip: Int, take: Int, orderBy: PostOrderBy): [Post!]!
  post(id: String, slug: String): Post
  postsCount(filter: PostsFilter): Int!

  categories: [Category!]!
  category(id: String, slug: String): Category
  tags: [Tag!]!
  tag(id: String, slug: String): Tag

  projects(filter: ProjectsFilter, skip: Int, take: Int, orderBy: ProjectOrderBy): [Project!]!
  project(id: String, slug: String): Project
  projectsCount(filter: ProjectsFilter): Int!

  resume: Resume
  resumes(skip: Int, take: Int): [Resume!]!

  uploads(skip: Int, take: Int, folder: String, orderBy: UploadOrderBy): [Upload!]!
  upload(id: String!): Upload
}

type Mutation {
  login(email: String!, password: String!): AuthPayload!
  refreshToken(refreshToken: String!): AuthPayload!

  createPost(input: PostInput!): Post!
  updatePost(id: String!, input: PostUpdateInput!): Post!
  deletePost(id: String!): Boolean!

  createCategory(input: CategoryInput!): Category!
  updateCategory(id: String!, input: CategoryUpdateInput!): Category!
  deleteCategory(id: String!): Boolean!

  createTag(input: TagInput!): Tag!
  updateTag(id: String!, input: TagUpdateInput!): Tag!
  deleteTag(id: String!): Boolean!

  createProject(input: ProjectInput!): Project!
  updateProject(id: String!, input: ProjectUpdateInput!): Project!
  deleteProject(id: String!): Boolean!

  createResume(input: ResumeInput!): Resume!
  updateResume(data: String!): Resume!
  deleteResume(id: String!): Boolean!

  uploadFile(file: FileUpload!, folder: String): Upload!
  deleteUpload(id: String!): Boolean!
}
"""
